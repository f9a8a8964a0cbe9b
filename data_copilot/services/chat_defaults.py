"""Chat Defaults — UI-facing constants shared by every host of the chat client.

Invariants:
    - AVAILABLE_MODELS is the only set a model switch may choose from
    - Prompt suggestions reference records seeded by services/seed_data.py
"""

from dataclasses import dataclass

HEADER_TEXT = "Copilot Assistant"

EMPTY_STATE_TEXT = (
    "Ask me anything about your data: orders, invoices, products, employees & more.\n"
    "Powered by Claude."
)

AVAILABLE_MODELS = (
    "claude-opus-4-1",
    "claude-sonnet-4-5",
    "claude-sonnet-4-0",
    "claude-haiku-4-5",
    "claude-3-5-haiku-latest",
)


@dataclass(frozen=True)
class PromptSuggestionItem:
    title: str
    text: str
    prompt: str


PROMPT_SUGGESTIONS = (
    PromptSuggestionItem(
        "Order Lookup",
        "Search orders by customer name or status",
        "Show me all orders for Around the Horn that are still processing",
    ),
    PromptSuggestionItem(
        "Invoice Aging",
        "Overdue invoices grouped by customer",
        "Give me an aging summary of overdue invoices grouped by customer, "
        "including totals and recommendations",
    ),
    PromptSuggestionItem(
        "Restock Advisor",
        "Low-stock products with supplier contacts",
        "Which products have fewer than 20 units in stock and are not "
        "discontinued? Include the supplier name and contact info",
    ),
    PromptSuggestionItem(
        "Sales Leaderboard",
        "Employee order stats and territory coverage",
        "How are the sales reps performing? Rank them by number of orders and "
        "show how many territories each one covers",
    ),
    PromptSuggestionItem(
        "Create Order",
        "Conversational order entry via AI",
        "Create a new order for customer Alfreds Futterkiste: 10 units of Chai "
        "and 5 units of Chang, ship via Speedy Express",
    ),
)


def is_available_model(model: str) -> bool:
    return model in AVAILABLE_MODELS
