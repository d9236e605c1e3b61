import os, sys, requests, readline
from dotenv import load_dotenv

# Load environment variables from .env file
load_dotenv()

SERVER_URL = os.getenv("CLOCKIFY_NLP_URL", "http://localhost:8000")

CONFIRM_WORDS = ['yes', 'y', 'confirm', 'ok', 'proceed', 'yup', 'yeah', 'sure', 'go ahead']
CANCEL_WORDS  = ['no', 'n', 'cancel', 'abort', 'stop']


def format_entry(entry: dict) -> str:
    start = entry['start'][:16].replace("T", " ")
    end   = entry['end'][11:16]
    project = entry.get('project') or '-'
    task    = f" / {entry['task']}" if entry.get('task') else ""
    return f"📅 {start}-{end}  📁 {project}{task}  📝 {entry['description']}"


def show_confirmation(entries: list[dict]):
    print("\n" + "="*60)
    print("📋 TIME ENTRY CONFIRMATION")
    print("="*60)
    for i, entry in enumerate(entries, 1):
        print(f"{i:>2}. {format_entry(entry)}")
    print("="*60)
    print("Please confirm these time entries:")
    print("• Type 'yes', 'y', 'confirm' to submit")
    print("• Type 'no', 'n', 'cancel' to discard")
    print("• Type a new command to start over")
    print("="*60)


def error_detail(r: requests.Response) -> str:
    try:
        return r.json().get("detail", r.text)
    except (ValueError, AttributeError):
        return r.text


def submit(entries: list[dict]):
    try:
        r = requests.post(f"{SERVER_URL}/time_entries", json={"entries": entries}, timeout=60)
    except requests.RequestException as e:
        print(f"❌ Could not reach server: {e}")
        return
    if r.ok:
        print(f"✅ Submitted {r.json()['submitted']} time entries to Clockify")
    else:
        print("❌ Server error:", error_detail(r))


def chat(command: str):
    try:
        r = requests.post(f"{SERVER_URL}/parse_command", json={"command": command}, timeout=120)
    except requests.RequestException as e:
        print(f"❌ Could not reach server: {e}")
        return

    if not r.ok:
        print("❌ Parse error:", error_detail(r))
        return

    entries = r.json()["entries"]
    if not entries:
        print("🤷 No time entries found in that command.")
        return

    show_confirmation(entries)
    confirmation = input("Your response: ").strip()

    if confirmation.lower() in CONFIRM_WORDS:
        submit(entries)
    elif confirmation.lower() in CANCEL_WORDS:
        print("❌ Time entries discarded.")
    elif confirmation:
        print(f"🔄 Re-parsing: '{confirmation}'")
        chat(confirmation)


if __name__ == "__main__":
    try:
        while True:
            chat(input("You: "))
    except (EOFError, KeyboardInterrupt):
        sys.exit()
