# Pydantic API contracts: feature records, reports, envelopes
