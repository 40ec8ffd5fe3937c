"""Pure domain rules (story types, word counting, statuses). No I/O here."""
