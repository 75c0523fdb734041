"""aarbind: package Go mobile bindings into Android library archives (.aar).

The pipeline resolves the Android SDK platform, builds the native glue
library for every requested architecture, compiles the generated Java
bindings into classes.jar, merges package assets and assembles the result
into an .aar plus a companion -sources.jar.
"""

__version__ = "0.1.0"
