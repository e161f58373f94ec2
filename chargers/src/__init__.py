"""
Observation normalization package for an EV-charger fleet.

Turns raw readings from the streaming (numeric observation id) and REST
(field name or composite id) transports into canonical, strongly-typed
observation records, and groups REST batches by charger.

CHANGELOG:
- 2026-10-10: Initial creation

TODO:
- None
"""
