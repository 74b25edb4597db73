# START OF FILE: quizlite/api/telegram/keyboards.py

import html
from typing import List, Optional

from telegram import ReplyKeyboardMarkup, InlineKeyboardMarkup, InlineKeyboardButton

from quizlite.app.wizard.layouts import StepView
from quizlite.domain.models import Layout, ProductSummary, RecommendationOutcome

QUIZ_BUTTON = '🎯 Take the quiz'
CONFIG_MANAGEMENT_BUTTON = '🧩 Manage quiz config'
CANCEL_BUTTON = 'Cancel'

EMPTY_RESULTS_TEXT = "No matches yet. Try different answers!"
FAILED_RESULTS_TEXT = "❌ We couldn't build your recommendations right now. Please try again later."

main_keyboard = ReplyKeyboardMarkup([[QUIZ_BUTTON]], resize_keyboard=True)

admin_keyboard = ReplyKeyboardMarkup(
    [[CONFIG_MANAGEMENT_BUTTON], [QUIZ_BUTTON]],
    resize_keyboard=True
)

cancel_keyboard = ReplyKeyboardMarkup([[CANCEL_BUTTON]], resize_keyboard=True)

config_management_keyboard = InlineKeyboardMarkup(
    [
        [
            InlineKeyboardButton("📥 Upload new", callback_data="config_upload"),
            InlineKeyboardButton("👀 Download current", callback_data="config_view"),
        ],
        [InlineKeyboardButton("⬅️ Back to admin menu", callback_data="config_back")]
    ]
)


def _chunk(buttons: List[InlineKeyboardButton], size: int) -> List[List[InlineKeyboardButton]]:
    return [buttons[i:i + size] for i in range(0, len(buttons), size)]


def _option_mark(view: StepView, selected: bool, dimmed: bool) -> str:
    if selected:
        return '✅ ' if view.multi else '🔘 '
    if dimmed:
        return '▫️ '
    return ''


def make_step_keyboard(view: StepView, can_go_back: bool, is_last: bool) -> InlineKeyboardMarkup:
    """Builds the inline keyboard for one wizard step."""
    rows: List[List[InlineKeyboardButton]] = []

    if view.slider_index is not None and view.stops:
        stop_buttons = [
            InlineKeyboardButton(
                f"● {label}" if i == view.slider_index else label,
                callback_data=f"quiz_pos_{i}"
            )
            for i, label in enumerate(view.stops)
        ]
        rows.extend(_chunk(stop_buttons, 3))

    # A plain slider's options are its positions, already shown above
    if view.layout is not Layout.SLIDER:
        option_buttons = [
            InlineKeyboardButton(
                _option_mark(view, opt.selected, opt.dimmed) + (opt.label or opt.value),
                callback_data=f"quiz_opt_{opt.index}"
            )
            for opt in view.options
        ]
        rows.extend(_chunk(option_buttons, 2 if view.layout is Layout.TONE_FACES else 1))

    nav = []
    if can_go_back:
        nav.append(InlineKeyboardButton("⬅️ Previous", callback_data="quiz_prev"))
    next_label = "See results" if is_last else "Continue ➡️"
    if not view.valid:
        next_label = f"🔒 {next_label}"
    nav.append(InlineKeyboardButton(next_label, callback_data="quiz_next"))
    rows.append(nav)
    return InlineKeyboardMarkup(rows)


def format_step_text(view: StepView) -> str:
    dots = ' '.join('●' if i == view.step else '○' for i in range(view.total))
    lines = [f"<b>{html.escape(view.title)}</b>"]
    if view.subtitle:
        lines.append(html.escape(view.subtitle))
    if view.layout is Layout.UNDERTONE:
        described = [o for o in view.options if o.desc]
        if described:
            lines.append("")
            lines.extend(f"<b>{html.escape(o.label)}</b>: {html.escape(o.desc)}" for o in described)
    lines.append("")
    lines.append(dots)
    return "\n".join(lines)


def format_product(product: ProductSummary, shop: Optional[str] = None) -> str:
    title = html.escape(product.display_title)
    line = f'<a href="https://{shop}/products/{product.handle}">{title}</a>' if shop else f"<b>{title}</b>"
    if product.price is not None:
        currency = f"{product.currency} " if product.currency else ""
        line += f" · {currency}{product.price}"
    return f"• {line}"


def format_results(outcome: RecommendationOutcome, title: str, shop: Optional[str] = None) -> str:
    if outcome.failed:
        return FAILED_RESULTS_TEXT
    lines = [f"<b>{html.escape(title)}</b>", ""]
    if outcome.is_empty:
        lines.append(EMPTY_RESULTS_TEXT)
    else:
        lines.extend(format_product(p, shop) for p in outcome.products)
    return "\n".join(lines)

# END OF FILE: quizlite/api/telegram/keyboards.py
