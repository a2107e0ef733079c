"""
Rendering Context

Responsibilities:
- Compiles a folder's .tex source to PDF inside the container image
- Hides known-harmless compiler warnings from the console
- Builds the container image from its Dockerfile

Owns: Containerized compilation, image builds
Never: Deletes files or decides which folders to build
"""

from texdock.contexts.rendering.compiler import CompilationResult, Compiler
from texdock.contexts.rendering.image import build_image, resolve_dockerfile
from texdock.contexts.rendering.output_filter import OutputFilter

__all__ = ["CompilationResult", "Compiler", "OutputFilter", "build_image", "resolve_dockerfile"]
