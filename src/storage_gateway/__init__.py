"""Unified storage gateway: images, contracts, order queue and customer profiles behind one HTTP API."""
