"""Game layer: combatants, managers, damage rolls and the Game facade.

- game.py: Command facade and event pump
- battle_calculator.py: Damage rolls and shield absorption
- autopilot.py: Scripted player strategies for simulations
"""
