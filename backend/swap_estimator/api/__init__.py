"""HTTP API for the swap estimator."""
