"""HTTP API for assessments and candidate sessions."""
