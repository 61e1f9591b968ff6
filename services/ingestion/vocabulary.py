# services/ingestion/vocabulary.py
"""
Field names understood by the importer.

These are the exact (case-sensitive) keys written by the upstream export
tools. Renaming any of them breaks every export already in circulation.
"""

TITLE_FIELD = "Título"
YEAR_FIELD = "Año"
TAGS_FIELD = "Etiquetas"
SUMMARY_FIELD = "Resumen Ejecutivo"
CONTRIBUTION_FIELD = "Conclusión/Aporte Clave"

# Checked in this order, first usable value wins
EXPLICIT_LINK_FIELDS = ("url", "link", "URL", "href", "doi")

# Wrapper keys
ENVELOPE_FIELD = "data"
EMBEDDED_OUTPUT_FIELD = "output"

# Defaults
DEFAULT_TITLE = "Untitled Paper"
DEFAULT_YEAR = "N/D"
DEFAULT_SUMMARY = "No summary provided."
