import asyncio
import sys
from pathlib import Path

def run():
    """Register the catalog sync webhook with Stripe

    Usage: python manage.py register_webhook [url]
    Defaults to PUBLIC_BASE_URL + /api/v1/webhook.
    """

    # Add the project root to Python path so we can import the app
    project_root = Path(__file__).parent.parent.parent
    sys.path.insert(0, str(project_root))

    url = sys.argv[2] if len(sys.argv) > 2 else None

    try:
        from app.core.config import settings
        from app.core.exceptions import AppError
        from app.services.product_service import ProductService
        from app.services.stripe_gateway import StripeGateway

        async def register():
            service = ProductService(settings, StripeGateway(settings))
            result = await service.register_webhook(url)
            print(f"Webhook registered: {result['webhookId']} -> {result['webhookUrl']}")
            if result.get("secret"):
                print("Set STRIPE_WEBHOOK_SECRET to the signing secret:")
                print(f"  {result['secret']}")

        asyncio.run(register())

    except ImportError as e:
        print(f"Error importing ProductService: {e}")
        print("Make sure you're running this from the project root directory.")
    except AppError as e:
        print(f"Error registering webhook: {e.message}")

if __name__ == "__main__":
    run()
