"""Tooling for Shane Nolan's blog.

The blog itself is declarative: ``blog.yaml`` names the theme and analytics
plugins and describes the site, and ``content/posts`` holds the markdown
posts. The external static-site build tool renders both. This package loads
and validates that configuration and content so problems surface before a
build.

The main entry point is the CLI module, which provides commands for checking
the repository, printing the configuration, listing posts and starting a new
post.
"""

__all__ = ["__version__"]
__version__ = "0.1.0"
