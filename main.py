import sys
from config import settings
from ui.app import create_app

def main():
    """
    StockSight Entry Point.
    Serves the local dashboard on http://127.0.0.1:5000.
    """
    print("📈 StockSight - Local Stock Dashboard Starting...")
    print(f"📂 Data Directory: {settings.DATA_DIR}")

    create_app().run(host="127.0.0.1", port=5000, debug=False)

if __name__ == "__main__":
    try:
        main()
    except KeyboardInterrupt:
        print("\n🛑 Execution interrupted by user.")
        sys.exit(0)
    except Exception as e:
        print(f"\n🔥 Fatal System Error: {e}")
        sys.exit(1)
