"""core: pure neurochemical model (no UI, no network)."""

API_VERSION = "core-v2-neuropath"
