import os

from sign_addon import sign_addon_and_exit

if __name__ == "__main__":
    sign_addon_and_exit(
        {
            "xpi_path": "my-extension.zip",
            "id": None,
            "version": "1.0",
            "api_key": os.environ["SIGN_ADDON_API_KEY"],
            "api_secret": os.environ["SIGN_ADDON_API_SECRET"],
            "verbose": True,
        }
    )
