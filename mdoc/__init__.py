"""mdoc: browse a directory of Markdown documents as a website."""
