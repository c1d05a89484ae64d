"""
QA Scenario Hub
Prompt construction for scenario generation.

Two strings are sent to the model:
    - a fixed system prompt (senior QA persona + JSON-only output contract)
    - a user prompt carrying the platform context, the category taxonomy,
      the raw PRD text and the JSON output template

Usage:
    from app.ai.prompts import build_system_prompt, build_user_prompt
    system = build_system_prompt()
    user = build_user_prompt(project.prd_content, project.platform)
"""

# ── Service domain context ───────────────────────────────────────────────────

CONSUMER_APP_CONTEXT = """### Consumer app
- Users browse nearby stores that sell surplus food at a discount before closing time.
- Core flow: location permission → store list / map → item detail → order → payment → pickup.
- Orders are pick-up only; each order has a pickup window set by the store.
- Stock is limited and shared with other buyers; items can sell out at any moment.
- Push notifications announce new discounts, order confirmation and pickup reminders.
- Sign-up and login via social accounts or phone number verification."""

SELLER_APP_CONTEXT = """### Seller app
- Store owners register surplus items, set discount price, quantity and pickup window.
- Incoming orders must be accepted or rejected; accepted orders are handed over at pickup.
- Pickup is confirmed by scanning or entering the order code shown in the consumer app.
- Sellers adjust stock in real time; changes must reflect immediately for buyers.
- Settlement summaries show daily sales, refunds and fees."""

TEST_CATEGORIES = """## Scenario categories
- POSITIVE: the intended happy path works end to end
- NEGATIVE: invalid input, rejected actions, error responses
- EDGE_CASE: boundary values, empty states, very large data, unusual timing
- PAYMENT: payment, cancellation and refund flows
- PICKUP: pickup window, order code verification, no-shows
- LOCATION: location permission, map, distance and address handling
- NOTIFICATION: push / in-app notifications and their deep links
- TIME_SENSITIVE: closing time, pickup deadlines, time-zone and clock changes
- INVENTORY: stock synchronisation between sellers and buyers
- AUTH: sign-up, login, session expiry, account states
- NETWORK: slow network, timeouts, offline mode, reconnection"""

TEST_CONSIDERATIONS = """## Things testers on this product always check
- Two buyers ordering the last remaining item at the same moment
- Prices or stock changing while an item is in the cart
- The app being backgrounded or killed during payment
- Orders placed seconds before the pickup window closes
- Location permission denied, or the device moving between areas
- Duplicate taps on buttons that submit orders or payments"""

PRIORITY_GUIDE = """## Priority guide
- CRITICAL: blocks ordering, payment or pickup; money or data loss
- HIGH: a core flow is broken but a workaround exists
- MEDIUM: secondary feature misbehaves or UX is confusing
- LOW: cosmetic issues, copy, minor layout problems"""

OUTPUT_TEMPLATE = """```json
{
  "scenarios": [
    {
      "title": "Scenario title (clear and specific)",
      "description": "What the scenario covers and why it matters",
      "category": "POSITIVE | NEGATIVE | EDGE_CASE | PAYMENT | PICKUP | LOCATION | TIME_SENSITIVE | INVENTORY | NOTIFICATION | NETWORK | AUTH",
      "priority": "CRITICAL | HIGH | MEDIUM | LOW",
      "deviceType": "ANDROID | IOS | BOTH",
      "testCases": [
        {
          "step": 1,
          "action": "Concrete action the user performs",
          "expected": "Result the user can observe"
        }
      ]
    }
  ]
}
```"""

SYSTEM_PROMPT = """You are a senior QA engineer and UX specialist with ten years of experience.
You design test scenarios from the user's point of view.

## Principles

1. **User journey first**: focus on what real users do, not on implementation details.
2. **Expectations and emotions**: consider what the user expects and feels at each step.
3. **Real context**: on the subway, during a busy lunch break, on first use.
4. **Personas**: new and returning users, young and old, experienced and novice.

## How to write scenarios

Bad: "Check that the login API returns 200"
Good: "A hungry office worker quickly looks for a discounted meal nearby at lunch"

Bad: "Payment module is called when the pay button is clicked"
Good: "The user changes their mind right before paying and switches to another item"

Respond only in the JSON format you are given."""

REQUIREMENTS = """## Requirements

1. **User-story titles**: phrase titles as "When ..." or "A user who ...".
2. Generate at least three scenarios per feature.
3. POSITIVE, NEGATIVE and EDGE_CASE categories are mandatory.
4. Each scenario has 3-7 test cases centred on user actions.
5. **action**: "The user ..." (e.g. "Taps the 'Nearby' tab on the home screen").
6. **expected**: something the user can verify (e.g. "Discounted stores within 500 m are listed").
7. Output nothing outside the JSON block.

## Scenario mix

### A. User journeys (30%)
1. **Happy path**: the ideal journey
2. **First-time user**: someone opening the app for the first time
3. **In a hurry**: the flow when time is short

### B. Edge cases and functional QA (70%)
4. **Boundary values**: min/max, empty, zero, one, bulk data
5. **Network errors**: slow network, timeout, disconnect, reconnect
6. **Permissions and state**: expired login, missing permission, concurrent sessions
7. **Data state**: empty list, no data, loading, error state
8. **Input validation**: invalid input, special characters, long text, injection attempts
9. **Concurrency**: double taps, rapid repeated requests, simultaneous edits
10. **Recovery**: back, cancel, undo, refresh
11. **Device specifics**: rotation, backgrounding, low memory, notifications

## Category ratio

- POSITIVE: 20%
- NEGATIVE: 40%
- EDGE_CASE: 40%"""


def build_system_prompt() -> str:
    """Fixed QA persona and output contract."""
    return SYSTEM_PROMPT


def platform_context(platform: str) -> str:
    """Domain context for the platform; both contexts for BOTH, consumer otherwise."""
    if platform == "SELLER_APP":
        return SELLER_APP_CONTEXT
    if platform == "BOTH":
        return f"{CONSUMER_APP_CONTEXT}\n\n{SELLER_APP_CONTEXT}"
    return CONSUMER_APP_CONTEXT


def build_user_prompt(prd_content: str, platform: str) -> str:
    """Interpolate platform context, taxonomy and the raw PRD into the user prompt."""
    return f"""
## Service context
{platform_context(platform)}

{TEST_CATEGORIES}

{TEST_CONSIDERATIONS}

{PRIORITY_GUIDE}

---

## PRD
{prd_content}

---

## Output format

Answer only with JSON in the format below. Do not include any other text.

{OUTPUT_TEMPLATE}

{REQUIREMENTS}
"""
