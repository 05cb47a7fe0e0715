"""Request pipeline services: build, send, classify, render, dispatch."""
