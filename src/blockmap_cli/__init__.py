"""Blockmap - turn UI component source into CMS block schemas."""

__version__ = "0.1.0"
