"""Version 1 of the Estoque API."""
