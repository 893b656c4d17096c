"""
English Quest framework module.

Provides game-specific systems built on top of the engine:
- Components (player, equipment, mini-game types; Pydantic models)
- Session (mini-game rules and the session engine)
- Progression (leveling, fainting, streaks, badges)
- History (append-only session log)
- Analysis (weak points and study plans)
- Navigation (screen state machine)
- Save (persistence)
"""
