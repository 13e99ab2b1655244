"""Booking capacity and schedule availability service for a custom-cake bakery."""
