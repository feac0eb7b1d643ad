"""Embedded runtime for custom facts.

The runtime executes externally-authored fact-definition files in an
isolated interpreter context and feeds the facts they register into the
shared FactCollection. See `hostfacts.runtime.bridge` for the lifecycle
entry points.
"""
