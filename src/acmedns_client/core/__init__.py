"""Core: configuración, dominio y errores. No conoce HTTP ni la CLI."""
