"""
Hue lighting agent.
Interactive chat interface for controlling Philips Hue lights with the hue tool.
"""
import os
import sys
import logging
from dotenv import load_dotenv
from strands import Agent
from strands.models.anthropic import AnthropicModel

from strands_hue import hue

# Load environment variables
load_dotenv()

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class Config:
    """Agent configuration."""

    # Model settings
    ANTHROPIC_API_KEY = os.getenv("ANTHROPIC_API_KEY")
    MODEL_ID = os.getenv("ANTHROPIC_MODEL_ID", "claude-sonnet-4-20250514")
    MAX_TOKENS = int(os.getenv("MAX_TOKENS", "4000"))
    TEMPERATURE = float(os.getenv("TEMPERATURE", "0.7"))

    # Bridge settings
    HUE_BRIDGE_IP = os.getenv("HUE_BRIDGE_IP")
    HUE_API_KEY = os.getenv("HUE_API_KEY")

    AGENT_NAME = "HueAgent"
    VERSION = "0.1.0"

    @classmethod
    def validate(cls) -> bool:
        """Validate required configuration."""
        ok = True
        for name in ("ANTHROPIC_API_KEY", "HUE_BRIDGE_IP", "HUE_API_KEY"):
            if not getattr(cls, name):
                logger.error(f"{name} not set in environment")
                ok = False
        return ok


SYSTEM_PROMPT = """You control the Philips Hue lights in this home with the hue tool.

Capabilities:
- List lights and read a single light's state
- Set brightness (0-254, 0 turns the light off)
- Set color by hex (#FF8800), name (red, purple) or white temperature (warm, cool, 2700K)
- Turn lights on or off

Rules:
- Call list_lights first when you do not know a light's id
- Use light_id="all" when the user means every light
- Report failures from the tool as they are; do not retry on your own
"""


def create_agent():
    """Create and configure the agent."""
    model = AnthropicModel(
        client_args={"api_key": Config.ANTHROPIC_API_KEY},
        max_tokens=Config.MAX_TOKENS,
        model_id=Config.MODEL_ID,
        params={"temperature": Config.TEMPERATURE}
    )

    agent = Agent(
        model=model,
        system_prompt=SYSTEM_PROMPT,
        tools=[hue]
    )

    logger.info(f"Initialized {Config.AGENT_NAME} v{Config.VERSION}")
    return agent


def interactive_mode(agent):
    """Run agent in interactive chat mode."""
    print(f"💡 {Config.AGENT_NAME} (type 'quit' to exit, 'metrics' to see usage)\n")

    while True:
        try:
            user_input = input("You: ").strip()

            if not user_input:
                continue

            if user_input.lower() in ['quit', 'exit', 'q']:
                print("\n👋 Goodbye!")
                break

            if user_input.lower() == 'metrics':
                metrics = agent.event_loop_metrics.get_summary()
                print("\n📊 Token Usage:")
                print(f"  Input:  {metrics['accumulated_usage']['inputTokens']:,}")
                print(f"  Output: {metrics['accumulated_usage']['outputTokens']:,}")
                print(f"  Total:  {metrics['accumulated_usage']['totalTokens']:,}\n")
                continue

            response = agent(user_input)
            print(f"\nAgent: {response}\n")

        except KeyboardInterrupt:
            print("\n\n👋 Goodbye!")
            break
        except Exception as e:
            print(f"\n❌ Error: {e}\n")
            logger.exception("Unexpected error in interactive mode")


def single_query_mode(agent, query):
    """Run agent with a single query."""
    print(f"💡 {Config.AGENT_NAME}\n")
    print(f"Query: {query}\n")

    try:
        response = agent(query)
        print(f"Response: {response}\n")

        metrics = agent.event_loop_metrics.get_summary()
        print("📊 Metrics:")
        print(f"  Tokens: {metrics['accumulated_usage']['totalTokens']}")

    except Exception as e:
        print(f"❌ Error: {e}")
        logger.exception("Error in single query mode")


def main():
    """Main entry point."""

    if len(sys.argv) > 1 and sys.argv[1] in ['-h', '--help']:
        print(f"{Config.AGENT_NAME} v{Config.VERSION}\n")
        print("Usage:")
        print("  python main.py                        # Interactive mode")
        print("  python main.py 'dim the lights'       # Single query")
        print("  python main.py --help                 # Show this help")
        print("\nEnvironment: ANTHROPIC_API_KEY, HUE_BRIDGE_IP, HUE_API_KEY")
        return

    if not Config.validate():
        print("❌ Configuration error. Check your .env file.")
        sys.exit(1)

    try:
        agent = create_agent()
    except Exception as e:
        print(f"❌ Failed to create agent: {e}")
        logger.exception("Failed to create agent")
        sys.exit(1)

    if len(sys.argv) > 1:
        query = ' '.join(sys.argv[1:])
        single_query_mode(agent, query)
    else:
        interactive_mode(agent)


if __name__ == "__main__":
    main()
