"""Registration, credentials and sessions for futuresim."""
