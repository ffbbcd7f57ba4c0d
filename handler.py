# Callbacks the reader drives. Subclass NLHandler and override what you need;
# every segment callback falls back to handle_segment, which does nothing.


class NLHandler:
    def handle_header(self, header):
        """Called once with the complete NLHeader before any segment."""

    def handle_segment(self, segment, body):
        """Fallback for segment kinds without their own override."""

    # segments with line-counted bodies
    def handle_function(self, segment, body):
        self.handle_segment(segment, body)

    def handle_suffix(self, segment, body):
        self.handle_segment(segment, body)

    def handle_defined_var(self, segment, body):
        self.handle_segment(segment, body)

    def handle_dual_guesses(self, segment, body):
        self.handle_segment(segment, body)

    def handle_primal_guesses(self, segment, body):
        self.handle_segment(segment, body)

    def handle_con_bounds(self, segment, body):
        self.handle_segment(segment, body)

    def handle_var_bounds(self, segment, body):
        self.handle_segment(segment, body)

    def handle_column_sizes(self, segment, body):
        self.handle_segment(segment, body)

    def handle_jacobian(self, segment, body):
        self.handle_segment(segment, body)

    def handle_gradient(self, segment, body):
        self.handle_segment(segment, body)

    # expression roots
    def handle_algebraic_con(self, segment, body):
        self.handle_segment(segment, body)

    def handle_logical_con(self, segment, body):
        self.handle_segment(segment, body)

    def handle_objective(self, segment, body):
        self.handle_segment(segment, body)

    # expression nodes
    def handle_number(self, segment, body):
        self.handle_segment(segment, body)

    def handle_short_int(self, segment, body):
        self.handle_segment(segment, body)

    def handle_long_int(self, segment, body):
        self.handle_segment(segment, body)

    def handle_variable_ref(self, segment, body):
        self.handle_segment(segment, body)

    def handle_operator(self, segment, body):
        self.handle_segment(segment, body)

    def handle_call(self, segment, body):
        self.handle_segment(segment, body)

    def handle_string(self, segment, body):
        self.handle_segment(segment, body)
