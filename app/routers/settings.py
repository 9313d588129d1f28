from fastapi import APIRouter, Form

from bakers_price.config import get_currency_symbol, get_setting, set_setting

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("")
def settings_page():
    key = get_setting("claude_api_key") or ""
    masked = key[:8] + "..." if len(key) > 8 else ""
    return {
        "key_set": bool(key),
        "masked_key": masked,
        "currency_symbol": get_currency_symbol(),
    }


@router.post("")
def settings_save(claude_api_key: str = Form(""), currency_symbol: str = Form("")):
    if claude_api_key.strip():
        set_setting("claude_api_key", claude_api_key.strip())
    if currency_symbol.strip():
        set_setting("currency_symbol", currency_symbol.strip())
    return settings_page()
