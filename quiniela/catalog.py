"""Static question catalog for the Super Bowl LX quiniela.

The catalog is fixed for the whole event: ids never change once
predictions exist, and answers are stored as the exact option text.
"""


class CatalogQuestion:
    def __init__(self, id, text, options, category, is_winner=False):
        self.id = id
        self.text = text
        self.options = tuple(options)
        self.category = category
        self.is_winner = is_winner

    def accepts(self, answer):
        return answer in self.options

    def to_dict(self):
        return {
            "id": self.id,
            "question": self.text,
            "options": list(self.options),
            "category": self.category,
            "is_winner": self.is_winner,
        }


class QuestionCatalog:
    def __init__(self, questions):
        self._questions = list(questions)
        self._by_id = {q.id: q for q in self._questions}
        if len(self._by_id) != len(self._questions):
            raise ValueError("Duplicate question id in catalog")

    def __iter__(self):
        return iter(self._questions)

    def __len__(self):
        return len(self._questions)

    def __contains__(self, question_id):
        return question_id in self._by_id

    @property
    def ids(self):
        return [q.id for q in self._questions]

    def get(self, question_id):
        return self._by_id.get(question_id)

    def to_list(self):
        return [q.to_dict() for q in self._questions]


QUESTIONS = [
    # --- PREGAME ---
    CatalogQuestion(1, "¿Quién gana el volado?", ["Seahawks", "Patriots"], "pregame"),
    CatalogQuestion(2, "¿Qué cara cae en la moneda?", ["Cara (Heads)", "Cruz (Tails)"], "pregame"),
    CatalogQuestion(3, "Duración del Himno Nacional",
                    ["Más de 119.5 seg", "Menos de 119.5 seg"], "pregame"),

    # --- GAME ---
    CatalogQuestion(4, "Primer Touchdown: ¿Cómo se anota?",
                    ["Por Pase", "Por Carrera", "Defensa/Equipos Especiales"], "game"),
    CatalogQuestion(5, "¿El balón pega en los postes? (Doink)", ["Sí, ¡Doink!", "No"], "game"),
    CatalogQuestion(6, "¿Habrá un Safety en el partido?", ["Sí", "No"], "game"),
    CatalogQuestion(7, "¿Qué pasa primero: Pase Incompleto o Intercepción?",
                    ["Pase Incompleto", "Intercepción"], "game"),
    CatalogQuestion(8, "Distancia del 1er Gol de Campo",
                    ["Más de 38.5 yardas", "Menos de 38.5 yardas"], "game"),
    CatalogQuestion(9, "¿Última jugada será rodilla al piso?",
                    ["Sí (Victory Formation)", "No"], "game"),

    # --- HALFTIME ---
    CatalogQuestion(10, "1ra Canción de Bad Bunny",
                    ["Tití Me Preguntó", "Mónaco", "Baile Inolvidable", "Otra canción"], "halftime"),
    CatalogQuestion(11, "¿Qué trae Bad Bunny en la cabeza al salir?",
                    ["Gorra de béisbol", "Sombrero de paja/vaquero", "Nada (pelo suelto)", "Otro accesorio"],
                    "halftime"),
    CatalogQuestion(12, "¿Quién será el invitado sorpresa?",
                    ["Cardi B", "J Balvin", "Jennifer Lopez", "Nadie / Otro artista"], "halftime"),
    CatalogQuestion(13, "Total de Canciones en el Show",
                    ["12 o más (Over)", "11 o menos (Under)"], "halftime"),

    # --- FINAL ---
    CatalogQuestion(14, "GANADOR DEL SUPER BOWL LX",
                    ["Seattle Seahawks", "New England Patriots"], "final", is_winner=True),
    CatalogQuestion(15, "Total de Puntos Combinados",
                    ["Más de 45.5 (Over)", "Menos de 45.5 (Under)"], "final"),
    CatalogQuestion(16, "MVP del Super Bowl",
                    ["Un Quarterback", "Receptor o Corredor", "Jugador Defensivo"], "final"),
    CatalogQuestion(17, "Color del Gatorade al Entrenador",
                    ["Naranja", "Amarillo/Verde Lima", "Azul", "Otro color / No le tiran"], "final"),
]

DEFAULT_CATALOG = QuestionCatalog(QUESTIONS)
