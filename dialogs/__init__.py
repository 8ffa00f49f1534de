"""Dialogs for PDF Batch Signer."""
