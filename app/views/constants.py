"""
UI/view constants centralized for reuse across view modules.

Only magic numbers, labels and styles live here; no behavior.
"""

from __future__ import annotations

# Tile grid
GRID_COLUMNS: int = 3
GRID_SPACING_PX: int = 12
EDITOR_MIN_WIDTH_PX: int = 280
PREVIEW_MAX_SIDE_PX: int = 160

# Status bar
DEFAULT_STATUS_TIMEOUT_MS: int = 5000
STATUS_STYLES: dict[str, str] = {
    "info": "color: #1a4f8b; background: #e8f0fb; padding: 2px 8px;",
    "success": "color: #1b5e20; background: #e6f4ea; padding: 2px 8px;",
    "error": "color: #b00020; background: #fdecea; padding: 2px 8px;",
}

# Dialogs
IMPORT_FILTER: str = "JSON Files (*.json);;All Files (*)"
IMAGE_FILTER: str = "Images (*.jpg *.jpeg *.png *.gif *.webp *.bmp *.avif *.svg)"
CLEAR_CONFIRM_TEXT: str = "Clear all draft data? This cannot be undone."

# Placeholders
TITLE_PLACEHOLDER: str = "e.g., Antique Silver Tea Set"
PRICE_PLACEHOLDER: str = "e.g., $1,250.00"
URL_PLACEHOLDER: str = "https://www.ebay.com/itm/..."
REMOTE_PLACEHOLDER: str = "https://i.ebayimg.com/..."
