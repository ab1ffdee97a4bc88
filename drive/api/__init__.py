"""HTTP API: versioned authenticated routes and public downloads."""
