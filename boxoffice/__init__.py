"""Boxoffice: event ticketing with hosted payment checkout."""
