import sys
import logging
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent))

from quest_engine.resources.database import ContentDatabase
from quest_framework.components.modes import MiniGameType

def main():
    logging.basicConfig(level=logging.INFO)
    logger = logging.getLogger("DataVerification")

    try:
        db = ContentDatabase(Path(__file__).parent / "game" / "data")

        logger.info("Loading prompt banks...")
        loaded = db.load_all()
        assert loaded > 0, "No prompts loaded"

        # Every mini-game needs a bank
        for mini_game in MiniGameType:
            count = db.count(mini_game)
            assert count > 0, f"No prompts for {mini_game.value}"
            assert db.get_prompts_for(mini_game, difficulty=1), f"Cannot draw {mini_game.value} prompts"
            logger.info(f"{mini_game.label}: {count} prompts")

        # Spot checks
        assert db.get_prompt("vocab_mitigate").answer == "reduce"
        assert db.category_of("grammar_went") == "past_tense"
        assert "fleeting" in db.get_prompt("vocab_ephemeral").accepted

        logger.info("VERIFICATION SUCCESSFUL: All prompt banks loaded and validated.")

    except Exception as e:
        logger.error(f"VERIFICATION FAILED: {e}")
        sys.exit(1)

if __name__ == "__main__":
    main()
