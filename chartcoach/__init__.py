"""
Chart Coach: AI trading coach for chart screenshots and entry models.

Application package root. A modular monolith using hexagonal
architecture (ports & adapters).

Bounded contexts:
    - coaching: chart analysis history, pair watchlist, AI generation,
      study workspaces and the client-side entry-model store.
"""
