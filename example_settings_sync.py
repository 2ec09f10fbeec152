"""
Example: Settings Sync Through the Drive App Data Folder

This example authorizes with the OAuth2 implicit flow, stores a settings
document in the app data folder and prints a line whenever another device
changes it.

Prerequisites:
1. Create a Google Cloud Project and enable the Drive API
2. Create an OAuth 2.0 client ID (Web application type)
3. Add the redirect URI below to the authorized redirect URIs
4. Export GOOGLE_DRIVE_CLIENT_ID (and optionally GOOGLE_DRIVE_REDIRECT_URI)

Usage:
    python example_settings_sync.py
"""

import asyncio
import logging
import time

from src.google_drive_sync import GoogleDriveSyncProvider, SyncSettings


def on_sync_required():
    print("Remote settings changed, a sync is required")


async def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    settings = SyncSettings.from_env()
    provider = GoogleDriveSyncProvider.from_settings(settings, on_sync_required)

    print("=" * 60)
    print("Google Drive Settings Sync Example")
    print("=" * 60)
    print()

    await provider.init()
    if not provider.is_authorized():
        print("Your browser was opened to authorize access.")
        print("After approving, paste the full URL you were redirected to:")
        redirect_url = input("> ").strip()
        if not await provider.complete_authorization(redirect_url):
            print("Authorization failed.")
            await provider.close()
            return

    try:
        current = await provider.load("settings.json")
        if current is False:
            print("Failed to load settings.")
            return
        print(f"Current settings: {current}")

        saved = await provider.save("settings.json", {"timestamp": int(time.time())})
        print(f"Saved: {saved}")

        print("Watching for remote changes, press Ctrl+C to stop...")
        await asyncio.Event().wait()
    finally:
        await provider.close()


if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
