"""Convos - conversations and threaded messages over HTTP."""
