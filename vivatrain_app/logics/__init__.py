"""Pure domain logic shared by the server and the client controllers."""
