import asyncio
import sys
from pathlib import Path

def run():
    """Mirror the Stripe catalog into the Supabase products/prices tables"""

    # Add the project root to Python path so we can import the app
    project_root = Path(__file__).parent.parent.parent
    sys.path.insert(0, str(project_root))

    try:
        from app.core.config import settings
        from app.core.exceptions import AppError
        from app.services.product_service import ProductService
        from app.services.stripe_gateway import StripeGateway

        async def sync():
            service = ProductService(settings, StripeGateway(settings))
            result = await service.sync_products()
            summary = result["summary"]
            print(f"Synced {summary['products_processed']} products and {summary['prices_processed']} prices")
            for price in result["details"]["prices"]:
                print(f"  {price['product_name']:<30} {price['amount']:>10.2f} {price['currency'].upper()} {price['interval']}")

        asyncio.run(sync())

    except ImportError as e:
        print(f"Error importing ProductService: {e}")
        print("Make sure you're running this from the project root directory.")
    except AppError as e:
        print(f"Error syncing products: {e.message}")

if __name__ == "__main__":
    run()
