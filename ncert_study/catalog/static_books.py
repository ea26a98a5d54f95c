"""
Bundled NCERT book list.

Used whenever the live catalog is not configured, is unreachable, or has no
match for a query. One English edition per (class, subject); chapter PDFs
point at the publisher's site and are fetched through the PDF cache.
"""

from ncert_study.config import PDF_BASE_URL


def _chapters(code: str, names: list[str]) -> list[dict]:
    return [
        {"number": i, "name": name, "pdf_url": f"{PDF_BASE_URL}/{code}{i:02d}.pdf"}
        for i, name in enumerate(names, start=1)
    ]


NCERT_BOOKS = [
    {
        "id": "class9-math",
        "class": "9",
        "subject": "Math",
        "title": "Mathematics",
        "chapters": _chapters(
            "iemh1",
            [
                "Number Systems",
                "Polynomials",
                "Coordinate Geometry",
                "Linear Equations in Two Variables",
                "Introduction to Euclid's Geometry",
                "Lines and Angles",
                "Triangles",
                "Quadrilaterals",
                "Circles",
                "Heron's Formula",
                "Surface Areas and Volumes",
                "Statistics",
            ],
        ),
    },
    {
        "id": "class9-science",
        "class": "9",
        "subject": "Science",
        "title": "Science",
        "chapters": _chapters(
            "iesc1",
            [
                "Matter in Our Surroundings",
                "Is Matter Around Us Pure?",
                "Atoms and Molecules",
                "Structure of the Atom",
                "The Fundamental Unit of Life",
                "Tissues",
                "Motion",
                "Force and Laws of Motion",
                "Gravitation",
                "Work and Energy",
                "Sound",
                "Improvement in Food Resources",
            ],
        ),
    },
    {
        "id": "class9-social-studies",
        "class": "9",
        "subject": "Social Studies",
        "title": "India and the Contemporary World - I",
        "chapters": _chapters(
            "iess2",
            [
                "The French Revolution",
                "Socialism in Europe and the Russian Revolution",
                "Nazism and the Rise of Hitler",
                "Forest Society and Colonialism",
                "Pastoralists in the Modern World",
            ],
        ),
    },
    {
        "id": "class10-math",
        "class": "10",
        "subject": "Math",
        "title": "Mathematics",
        "chapters": _chapters(
            "jemh1",
            [
                "Real Numbers",
                "Polynomials",
                "Pair of Linear Equations in Two Variables",
                "Quadratic Equations",
                "Arithmetic Progressions",
                "Triangles",
                "Coordinate Geometry",
                "Introduction to Trigonometry",
                "Some Applications of Trigonometry",
                "Circles",
                "Areas Related to Circles",
                "Surface Areas and Volumes",
                "Statistics",
                "Probability",
            ],
        ),
    },
    {
        "id": "class10-science",
        "class": "10",
        "subject": "Science",
        "title": "Science",
        "chapters": _chapters(
            "jesc1",
            [
                "Chemical Reactions and Equations",
                "Acids, Bases and Salts",
                "Metals and Non-metals",
                "Carbon and its Compounds",
                "Life Processes",
                "Control and Coordination",
                "How do Organisms Reproduce?",
                "Heredity",
                "Light - Reflection and Refraction",
                "The Human Eye and the Colourful World",
                "Electricity",
                "Magnetic Effects of Electric Current",
                "Our Environment",
            ],
        ),
    },
    {
        "id": "class10-social-studies",
        "class": "10",
        "subject": "Social Studies",
        "title": "India and the Contemporary World - II",
        "chapters": _chapters(
            "jess3",
            [
                "The Rise of Nationalism in Europe",
                "Nationalism in India",
                "The Making of a Global World",
                "The Age of Industrialisation",
                "Print Culture and the Modern World",
            ],
        ),
    },
]
