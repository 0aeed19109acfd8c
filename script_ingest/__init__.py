"""
Script Ingestion Pipeline

Converts screenplay text, dialogue transcripts and spreadsheet-like tables
into an ordered sequence of script-line records.

Modules:
- config: Pipeline settings
- models: Tokens, dialogue blocks, script lines, diagnostics
- ingestion: Tokenizer, grouper, extractors and the pipeline orchestrator
- scripts: CLI tools
"""

__version__ = "0.1.0"
