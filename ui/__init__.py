"""
UI package for PDF Batch Signer.

MainWindow lives in ui.main_window; the other modules hold the tab builders
and handlers it delegates to.
"""
