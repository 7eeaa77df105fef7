import sys
from pathlib import Path

def run():
    """List the API routes, optionally filtered: python manage.py show_urls [substring]"""

    # Add the project root to Python path so we can import the app
    project_root = Path(__file__).parent.parent.parent
    sys.path.insert(0, str(project_root))

    needle = sys.argv[2] if len(sys.argv) > 2 else ""

    try:
        from fastapi.routing import APIRoute
        from app.main import app

        routes = [
            (route.path, ", ".join(sorted(route.methods - {"HEAD"})), route.endpoint.__name__)
            for route in app.routes
            if isinstance(route, APIRoute) and needle in route.path
        ]
        routes.sort()

        if not routes:
            print("No routes found.")
            return

        path_width = max(len(path) for path, _, _ in routes)
        methods_width = max(len(methods) for _, methods, _ in routes)
        for path, methods, endpoint in routes:
            print(f"{path:<{path_width}} | {methods:<{methods_width}} | {endpoint}")
        print(f"\nTotal routes: {len(routes)}")

    except ImportError as e:
        print(f"Error importing FastAPI app: {e}")
        print("Make sure you're running this from the project root directory.")

if __name__ == "__main__":
    run()
