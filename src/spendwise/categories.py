EXPENSE_CATEGORIES = [
    "Food",
    "Transport",
    "Rent",
    "Utilities",
    "Entertainment",
    "Shopping",
    "Health",
    "Education",
    "Other",
]

REVENUE_CATEGORIES = [
    "Salary",
    "Freelance",
    "Investment",
    "Gift",
    "Other",
]

# Suggested (not enforced) categories per entry type
CATEGORIES = {
    "expense": EXPENSE_CATEGORIES,
    "revenue": REVENUE_CATEGORIES,
}
