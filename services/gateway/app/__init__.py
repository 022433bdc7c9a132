"""HTTP gateway exposing create/read access to MongoDB collections."""
