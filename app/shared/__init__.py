"""Cross-cutting helpers (telemetry, ids, timestamps). No hierarchy rules live here."""
