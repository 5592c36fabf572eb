"""Blackjack-specific constants."""

BLACKJACK_VALUE = 21
DEALER_STAND_VALUE = 17

ACE_HIGH_VALUE = 11
ACE_LOW_VALUE = 1

INITIAL_CARDS_DEALT = 4  # 2 to player, 2 to dealer

# Payout multipliers applied to the wager; the result is the total returned
# to the player, stake included.
BLACKJACK_PAYOUT_MULTIPLIER = 2.5  # 3:2
WIN_PAYOUT_MULTIPLIER = 2.0  # 1:1
PUSH_PAYOUT_MULTIPLIER = 1.0
