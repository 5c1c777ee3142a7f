"""Streaming reconciliation core - stability detection, gated injection and the poll cycle."""
from dictation.sync.StabilityMatcher import stable_prefix, tokenize
from dictation.sync.InjectionGate import InjectionGate
from dictation.sync.SyncEngine import SyncEngine
from dictation.sync.PollTimer import PollTimer

__all__ = ['stable_prefix', 'tokenize', 'InjectionGate', 'SyncEngine', 'PollTimer']
