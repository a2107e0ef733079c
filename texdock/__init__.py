"""
texdock - containerized LaTeX builds for a folder of documents

Finds folders holding a .tex source, compiles them with latexmk inside a
Docker image, rebuilds on change, and removes build artifacts.

Architecture:
- Workspace Context: folder discovery, target resolution, artifact cleanup
- Rendering Context: containerized compilation and image builds
- Watching Context: filesystem-change providers and the rebuild loop
"""

__version__ = "0.1.0"
