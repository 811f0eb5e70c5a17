"""
CV maker core package.

The document subsystem parses the CV dialect (headers, contact lines,
bullet lists, job lines with dates, bold emphasis) into an immutable tree,
applies path-addressed edits for an interactive editor, and writes the tree
back out as dialect text. Around it sit a themed HTML preview, a saved
applications history and local draft storage.
"""
