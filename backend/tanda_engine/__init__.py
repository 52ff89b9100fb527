"""Tanda simulation and payment-protection restructuring service."""
