"""Scenario tests for lifecycle-probe.

These run the real lifecycle against a live platform: a browser, the
platform CLI and the data-plane CLI all act on one deployment. They are
marked ``live`` and deselected by default (``pytest -m live`` runs them).
"""
