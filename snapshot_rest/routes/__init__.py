"""HTTP routers for the snapshot REST service."""
