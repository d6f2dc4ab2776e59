"""Webhook ingress resources."""
