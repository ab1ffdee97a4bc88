"""Drive: content-addressed resource storage with webhook notifications."""
