"""Atheris fuzz targets for combparse.

This package contains Atheris-based fuzz targets for detecting crashes and
differential mismatches in the parsing engine. Requires Atheris installation
(``pip install combparse[fuzz]``).

Targets:
    cursor.py - Cursor navigation and line/column mapping
    findbyte.py - Block byte scanning against a per-item reference scan
    json_grammar.py - JSON grammar against the standard library json module
    stability.py - Detects unexpected exceptions from the reference grammars

Run a target directly, e.g. ``python fuzz/findbyte.py -max_total_time=60``.
"""
