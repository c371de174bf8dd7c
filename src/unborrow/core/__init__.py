"""
Core Package.

Contains the rewrite logic:
- Rewrite Engine
- Call Rewriter and its data model
- Marker Transformer, Scanners and Import Fixer
- Fresh name allocation
"""
