"""QRTix ticket-sales backend."""
