from .runner import run, sign_addon, sign_addon_and_exit

__all__ = ["run", "sign_addon", "sign_addon_and_exit"]
