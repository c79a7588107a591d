from agents.brand_awareness_agent.graph import get_brand_awareness_graph


def main():
    print("Generating graph visualization...")
    graph = get_brand_awareness_graph()
    try:
        # draw_mermaid_png calls the mermaid.ink API
        png_bytes = graph.get_graph().draw_mermaid_png()

        output_file = "brand_awareness_graph.png"
        with open(output_file, "wb") as f:
            f.write(png_bytes)

        print(f"Success! Graph visualization saved to {output_file}")

    except Exception as e:
        print(f"Error generating PNG: {e}")
        print("\nFalling back to Mermaid syntax. You can paste this into https://mermaid.live/ :\n")
        print(graph.get_graph().draw_mermaid())


if __name__ == "__main__":
    main()
