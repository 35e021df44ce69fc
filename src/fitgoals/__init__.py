"""fitgoals — fitness goal tracking API.

Users sign up, log in for a short-lived bearer token, and keep a private
list of fitness goals (weight loss, muscle gain, endurance, ...) with
progress entries.
"""

__version__ = "0.1.0"
