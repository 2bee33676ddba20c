"""quizdetect package initializer.

Makes `quizdetect` a proper Python package so that relative imports
like `from .errors import ExportError` work when modules are loaded via
`python -m quizbrowser.watch` or the test-suite.
"""
